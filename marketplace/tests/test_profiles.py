"""
Integration tests for the directory and profile endpoints.

Covers the public doctor/hospital/implant directories, self-service
profile updates with their ownership rules, and the administrator
console that creates pre-approved entities.
"""

from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from marketplace.models import Booking, Doctor, DoctorSurgery, Hospital, HospitalUser, Implant, ImplantUser, Patient, Surgery, User

PASSWORD = 'Str0ng!Passw0rd'


class ProfileAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(username='root@example.com', email='root@example.com',
                                              password=PASSWORD, role='admin')
        self.knee = Surgery.objects.create(name='Knee Arthroscopy', category='Orthopedics', base_price=Decimal('90000'))
        self.cabg = Surgery.objects.create(name='CABG', category='Cardiac', base_price=Decimal('250000'))

        doc_user = User.objects.create_user(username='ortho@example.com', email='ortho@example.com',
                                            password=PASSWORD, role='doctor')
        self.doctor = Doctor.objects.create(
            user=doc_user, full_name='Rahul Verma', medical_council_number='MCI-3003', city='Delhi',
            primary_specialization='Orthopedics', secondary_specializations=['Sports Medicine'],
            status=Doctor.STATUS_APPROVED, approved_by=self.admin,
        )
        DoctorSurgery.objects.create(doctor=self.doctor, surgery=self.knee, is_primary=True)

        hidden_user = User.objects.create_user(username='hidden@example.com', email='hidden@example.com',
                                               password=PASSWORD, role='doctor', is_active=False)
        self.hidden = Doctor.objects.create(user=hidden_user, full_name='Not Yet', medical_council_number='MCI-4004',
                                            city='Delhi')

        self.hospital = Hospital.objects.create(name='Metro Heart Institute', city='Delhi',
                                                status=Hospital.STATUS_APPROVED, approved_by=self.admin)
        self.primary = HospitalUser.objects.create(
            user=User.objects.create_user(username='primary@metro.example', email='primary@metro.example',
                                          password=PASSWORD, role='hospital'),
            hospital=self.hospital, full_name='Primary Admin', is_primary_admin=True,
        )
        self.clerk = HospitalUser.objects.create(
            user=User.objects.create_user(username='clerk@metro.example', email='clerk@metro.example',
                                          password=PASSWORD, role='hospital'),
            hospital=self.hospital, full_name='Front Desk',
        )

        self.implant = Implant.objects.create(name='AlphaHip', brand='JointWorks', price=Decimal('75000'),
                                              surgery_type='Hip Replacement', status=Implant.STATUS_APPROVED)
        self.implant_staff = ImplantUser.objects.create(
            user=User.objects.create_user(username='sales@jointworks.example', email='sales@jointworks.example',
                                          password=PASSWORD, role='implant'),
            implant=self.implant, full_name='Sales Lead', is_primary_admin=True,
        )

        self.patient = Patient.objects.create(
            user=User.objects.create_user(username='pat@example.com', email='pat@example.com',
                                          password=PASSWORD, role='patient'),
            full_name='Lata Joshi',
        )

    def authenticate(self, user: User) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    def test_public_doctor_directory_hides_unapproved(self):
        response = self.client.get(reverse('doctor_list'), {'city': 'delhi'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        ids = [d['id'] for d in response.data['data']]
        self.assertEqual(ids, [self.doctor.id])

        response = self.client.get(reverse('doctor_detail', args=[self.hidden.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_doctor_directory_filters(self):
        url = reverse('doctor_list')
        self.assertEqual(self.client.get(url, {'specialization': 'sports'}).data['pagination']['total'], 1)
        self.assertEqual(self.client.get(url, {'surgery_id': self.cabg.id}).data['pagination']['total'], 0)
        self.assertEqual(self.client.get(url, {'surgery_id': self.knee.id}).data['pagination']['total'], 1)

    def test_doctor_updates_own_profile_only(self):
        client = self.authenticate(self.doctor.user)
        response = client.patch(reverse('doctor_update', args=[self.doctor.id]),
                                {'bio': '<script>x</script>Knee specialist', 'experience_years': 12}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.doctor.refresh_from_db()
        self.assertEqual(self.doctor.bio, 'xKnee specialist')
        self.assertGreater(self.doctor.profile_completeness, 0)

        response = client.patch(reverse('doctor_update', args=[self.hidden.id]), {'bio': 'hijack'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_doctor_replaces_surgery_list(self):
        client = self.authenticate(self.doctor.user)
        url = reverse('doctor_surgeries', args=[self.doctor.id])
        response = client.put(url, {'surgeries': [{'surgery_id': self.cabg.id, 'is_primary': True}]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['id'] for s in response.data['data']], [self.cabg.id])

        response = client.put(url, {'surgeries': [{'surgery_id': 999}]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_surgery_catalogue(self):
        response = self.client.get(reverse('surgery_list'), {'category': 'orthopedics'})
        self.assertEqual([s['name'] for s in response.data['data']], ['Knee Arthroscopy'])
        response = self.client.get(reverse('surgery_detail', args=[self.knee.id]))
        self.assertEqual([d['id'] for d in response.data['data']['doctors']], [self.doctor.id])

    def test_hospital_update_keeps_status(self):
        client = self.authenticate(self.clerk.user)
        response = client.patch(reverse('hospital_update', args=[self.hospital.id]),
                                {'total_beds': 250, 'status': 'rejected'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.hospital.refresh_from_db()
        self.assertEqual(self.hospital.total_beds, 250)
        self.assertEqual(self.hospital.status, Hospital.STATUS_APPROVED)

        response = self.authenticate(self.doctor.user).patch(
            reverse('hospital_update', args=[self.hospital.id]), {'total_beds': 1}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_only_primary_admin_adds_staff(self):
        url = reverse('hospital_staff', args=[self.hospital.id])
        payload = {'email': 'nurse@metro.example', 'password': PASSWORD, 'full_name': 'Ward Nurse'}
        response = self.authenticate(self.clerk.user).post(url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        response = self.authenticate(self.primary.user).post(url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(User.objects.get(email='nurse@metro.example').is_active)

        response = self.authenticate(self.clerk.user).get(url)
        self.assertEqual(len(response.data['data']), 3)

    def test_implant_price_update(self):
        client = self.authenticate(self.implant_staff.user)
        response = client.patch(reverse('implant_price', args=[self.implant.id]), {'price': '82000'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.implant.refresh_from_db()
        self.assertEqual(self.implant.price, Decimal('82000'))

        response = self.client.get(reverse('implant_list'), {'search': 'jointworks'})
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_patient_profile_access(self):
        url = reverse('patient_detail', args=[self.patient.id])
        self.assertEqual(self.authenticate(self.patient.user).get(url).status_code, status.HTTP_200_OK)
        # doctors only see patients who booked with them
        self.assertEqual(self.authenticate(self.doctor.user).get(url).status_code, status.HTTP_403_FORBIDDEN)
        Booking.objects.create(patient=self.patient, surgery=self.knee, doctor=self.doctor, hospital=self.hospital,
                               total_cost=Decimal('1'), advance_payment=Decimal('0.05'))
        self.assertEqual(self.authenticate(self.doctor.user).get(url).status_code, status.HTTP_200_OK)

        response = self.authenticate(self.patient.user).patch(
            reverse('patient_update', args=[self.patient.id]), {'blood_group': 'O+', 'city': 'Delhi'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['profile_completeness'], 22)

    def test_admin_creates_preapproved_entities(self):
        client = self.authenticate(self.admin)
        response = client.post(reverse('admin_doctors'), {
            'email': 'fast.track@example.com', 'password': PASSWORD, 'full_name': 'Fast Track',
            'medical_council_number': 'MCI-5005',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        doctor = Doctor.objects.get(medical_council_number='MCI-5005')
        self.assertEqual(doctor.status, Doctor.STATUS_APPROVED)
        self.assertEqual(doctor.approved_by_id, self.admin.id)
        self.assertTrue(doctor.user.is_active)

        response = client.post(reverse('admin_implant_create'), {
            'email': 'ops@newimplant.example', 'password': PASSWORD, 'full_name': 'Ops',
            'implant_name': 'BetaKnee',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['status'], Implant.STATUS_APPROVED)
        self.assertTrue(User.objects.get(email='ops@newimplant.example').email_verified)

        response = client.get(reverse('admin_patients'), {'search': 'lata'})
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_admin_deletes_hospital_and_staff_logins(self):
        client = self.authenticate(self.admin)
        response = client.delete(reverse('admin_hospital_delete', args=[self.hospital.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Hospital.objects.filter(pk=self.hospital.id).exists())
        self.assertFalse(User.objects.filter(email='clerk@metro.example').exists())

    def test_hospital_with_bookings_cannot_be_deleted(self):
        Booking.objects.create(patient=self.patient, surgery=self.knee, doctor=self.doctor, hospital=self.hospital,
                               total_cost=Decimal('1'), advance_payment=Decimal('0.05'))
        response = self.authenticate(self.admin).delete(reverse('admin_hospital_delete', args=[self.hospital.id]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_admin_created_hospital_login_is_verified(self):
        response = self.authenticate(self.admin).post(reverse('admin_hospital_create'), {
            'email': 'desk@newhospital.example', 'password': PASSWORD, 'full_name': 'Desk',
            'hospital_name': 'Riverside Hospital', 'city': 'Delhi',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['status'], Hospital.STATUS_APPROVED)
        user = User.objects.get(email='desk@newhospital.example')
        self.assertTrue(user.is_active)
        self.assertTrue(user.email_verified)
